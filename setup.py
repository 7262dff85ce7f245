from setuptools import setup, find_packages
import re

# Read version from payrun/__init__.py
with open('payrun/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='pay-run',
    version=version,
    packages=find_packages(include=['payrun', 'payrun.*']),
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=13.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'pay-run=payrun.cli.__main__:main',
        ],
    },
    author='Personal',
    description='Periodic payroll for hourly, salaried and commissioned workers.',
    python_requires='>=3.10',
)
