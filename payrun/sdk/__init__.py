"""Pay Run SDK - Roster, pay schedules, salary calculation and payroll runs."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    # XDG paths
    get_data_path,
    get_roster_path,
    get_schedules_path,
    load_schedules,
    save_schedules,
)

from .formats import (
    parse_date,
    format_date,
    parse_amount,
    format_amount,
    format_total,
    format_hours,
)

from .schemas import (
    Category,
    HourlyPay,
    SalariedPay,
    CommissionedPay,
    Cash,
    Mail,
    BankDeposit,
    UnionMembership,
    TimeEntry,
    SaleEntry,
    ServiceFee,
    Worker,
)

from .schedule import (
    PaySchedule,
    ScheduleBook,
    parse_schedule,
    is_due,
    period_start,
    DEFAULT_SCHEDULES,
    InvalidScheduleError,
    ScheduleExistsError,
    UnknownScheduleError,
)

from .registry import (
    WorkerRegistry,
    load_registry,
    save_registry,
)

from .snapshots import (
    Snapshot,
    SnapshotStore,
)

from .history import (
    CommandExecutor,
    HistoryError,
    SystemClosedError,
    NothingToUndoError,
    NothingToRedoError,
)

from .calculator import (
    PaymentResult,
    compute_payment,
)

from .payroll import (
    PayrollLine,
    PayrollReport,
    CategoryTotals,
    total_payroll,
    run_payroll,
)

from .report import (
    format_payroll_report,
    write_payroll_report,
)

from .workers import (
    WorkerError,
    WorkerNotFoundError,
    InvalidFieldError,
    WrongCategoryError,
    NotUnionMemberError,
    UnionMemberNotFoundError,
    DuplicateUnionIdError,
)

from .system import PayrollSystem

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_data_path",
    "get_roster_path",
    "get_schedules_path",
    "load_schedules",
    "save_schedules",
    # Formats
    "parse_date",
    "format_date",
    "parse_amount",
    "format_amount",
    "format_total",
    "format_hours",
    # Schemas
    "Category",
    "HourlyPay",
    "SalariedPay",
    "CommissionedPay",
    "Cash",
    "Mail",
    "BankDeposit",
    "UnionMembership",
    "TimeEntry",
    "SaleEntry",
    "ServiceFee",
    "Worker",
    # Schedules
    "PaySchedule",
    "ScheduleBook",
    "parse_schedule",
    "is_due",
    "period_start",
    "DEFAULT_SCHEDULES",
    "InvalidScheduleError",
    "ScheduleExistsError",
    "UnknownScheduleError",
    # Registry and history
    "WorkerRegistry",
    "load_registry",
    "save_registry",
    "Snapshot",
    "SnapshotStore",
    "CommandExecutor",
    "HistoryError",
    "SystemClosedError",
    "NothingToUndoError",
    "NothingToRedoError",
    # Calculation and payroll
    "PaymentResult",
    "compute_payment",
    "PayrollLine",
    "PayrollReport",
    "CategoryTotals",
    "total_payroll",
    "run_payroll",
    "format_payroll_report",
    "write_payroll_report",
    # Worker errors
    "WorkerError",
    "WorkerNotFoundError",
    "InvalidFieldError",
    "WrongCategoryError",
    "NotUnionMemberError",
    "UnionMemberNotFoundError",
    "DuplicateUnionIdError",
    # Facade
    "PayrollSystem",
]
