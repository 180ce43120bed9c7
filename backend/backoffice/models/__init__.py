"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Integer surrogate keys; business numbers (ISBN, membership number) are unique columns

Design Decisions:
    - One file per entity (import/export jobs share job.py)
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from backoffice.models.category import Category  # noqa: F401
from backoffice.models.book import Book  # noqa: F401
from backoffice.models.member import Member  # noqa: F401
from backoffice.models.librarian import Librarian  # noqa: F401
from backoffice.models.transaction import Transaction  # noqa: F401
from backoffice.models.reservation import Reservation  # noqa: F401
from backoffice.models.fine import Fine  # noqa: F401
from backoffice.models.review import Review  # noqa: F401
from backoffice.models.notification import Notification  # noqa: F401
from backoffice.models.alert import Alert  # noqa: F401
from backoffice.models.audit_log import AuditLog  # noqa: F401
from backoffice.models.report import Report  # noqa: F401
from backoffice.models.job import ImportJob, ExportJob  # noqa: F401
