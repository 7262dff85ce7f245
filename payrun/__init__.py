"""Pay Run - periodic payroll with transactional undo/redo."""

__version__ = "0.3.0"
