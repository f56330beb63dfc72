"""Domain errors raised by the crud layer.

Routers roll back the session and translate these into HTTP responses:
NotFoundError subclasses become 404, every other LedgerError a 400.
"""


class LedgerError(ValueError):
    pass


class NotFoundError(LedgerError):
    pass


class VendorNotFoundError(NotFoundError):
    def __init__(self, vendor_id):
        super().__init__(f"Vendor {vendor_id} not found")
        self.vendor_id = vendor_id


class ScrapTypeNotFoundError(NotFoundError):
    def __init__(self, scrap_type_id):
        super().__init__(f"Scrap type {scrap_type_id} not found")
        self.scrap_type_id = scrap_type_id


class PurchaseNotFoundError(NotFoundError):
    def __init__(self, purchase_id):
        super().__init__(f"Purchase {purchase_id} not found")
        self.purchase_id = purchase_id


class PaymentNotFoundError(NotFoundError):
    def __init__(self, payment_id):
        super().__init__(f"Payment {payment_id} not found")
        self.payment_id = payment_id


class AccountNotFoundError(NotFoundError):
    def __init__(self, account_id):
        super().__init__(f"Account {account_id} not found")
        self.account_id = account_id


class MissingRateError(LedgerError):
    def __init__(self, vendor_id, scrap_type_id):
        super().__init__(f"Vendor rate missing for scrap type {scrap_type_id}")
        self.vendor_id = vendor_id
        self.scrap_type_id = scrap_type_id


class InactiveVendorError(LedgerError):
    def __init__(self, vendor):
        super().__init__(f"Vendor '{vendor.name}' is inactive")
        self.vendor_id = vendor.id


class CategoryMismatchError(LedgerError):
    def __init__(self, vendor, expected):
        super().__init__(f"Vendor '{vendor.name}' is a {vendor.category.value}, not a {expected.value}")
        self.vendor_id = vendor.id


class MaterialInUseError(LedgerError):
    def __init__(self, scrap_type):
        super().__init__(f"Material '{scrap_type.material_type}' is used by recorded purchases and cannot be deleted")
        self.scrap_type_id = scrap_type.id


class InvalidAmountError(LedgerError):
    def __init__(self, amount):
        super().__init__(f"Amount {amount} rounds to zero; payments must be at least 0.01")
        self.amount = amount
