# streetfood_connect/models/__init__.py
from .document_model import Document
from .account_model import Account
