"""
Timelog Kernel

Core of the staff time log:
- Bi-monthly payroll period resolution
- Activity and submission values
- Swappable persistence behind a store interface
- Structured logging and typed errors
"""

__version__ = "0.1.0"
