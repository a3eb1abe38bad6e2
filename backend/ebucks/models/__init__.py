from .auth import User
from .vouchers import Voucher
from .inventory import InventoryItem
from .sales import Transaction, SalesLogEntry
from .timekeeping import Timesheet
from .registers import Printer

__all__ = [
    'User',
    'Voucher',
    'InventoryItem',
    'Transaction', 'SalesLogEntry',
    'Timesheet',
    'Printer',
]
