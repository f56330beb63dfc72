from models.vendors import Vendor, VendorCategory, VendorStatus
from models.scrap_types import ScrapType
from models.vendor_rates import VendorRate
from models.purchases import ScrapPurchase, PaymentStatus
from models.purchase_line_items import PurchaseLineItem
from models.vendor_payments import VendorPayment
from models.daily_balances import VendorDailyBalance
from models.accounts import Account, AccountTransaction, AccountType, TransactionType
from models.audit_log import AuditLog

__all__ = ['Account', 'AccountTransaction', 'AccountType', 'AuditLog', 'PaymentStatus', 'PurchaseLineItem', 'ScrapPurchase', 'ScrapType', 'TransactionType', 'Vendor', 'VendorCategory', 'VendorDailyBalance', 'VendorPayment', 'VendorRate', 'VendorStatus',]
