from .inventory import Product
from .customers import Customer
from .sales import Sale
from .settings import StoreSettings
from .suppliers import Supplier, SupplierProduct, PurchaseOrder
from .documents import DocumentSequence

__all__ = [
    'Product',
    'Customer',
    'Sale',
    'StoreSettings',
    'Supplier', 'SupplierProduct', 'PurchaseOrder',
    'DocumentSequence',
]
