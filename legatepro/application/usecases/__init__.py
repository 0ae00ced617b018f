"""
Estate use cases.

Every operation takes the estate id and the current user id explicitly and
returns a tagged Outcome (see application.results).
"""

from .activity import ActivityPage, ListEstateActivityUseCase
from .base import EstateScopedUseCases
from .collaborators import CollaboratorUseCases
from .documents import DocumentUseCases
from .estates import EstateUseCases, EstateView
from .invites import InviteUseCases, IssuedInvite
from .invoices import InvoiceUseCases
from .notes import NoteUseCases
from .properties import PropertyUseCases
from .readiness import GetEstateReadinessUseCase
from .rent import RentLedgerRow, RentPaymentUseCases
from .tasks import TaskUseCases
from .utilities import UtilityAccountUseCases

__all__ = [
    "ActivityPage",
    "CollaboratorUseCases",
    "DocumentUseCases",
    "EstateScopedUseCases",
    "EstateUseCases",
    "EstateView",
    "GetEstateReadinessUseCase",
    "InviteUseCases",
    "InvoiceUseCases",
    "IssuedInvite",
    "ListEstateActivityUseCase",
    "NoteUseCases",
    "PropertyUseCases",
    "RentLedgerRow",
    "RentPaymentUseCases",
    "TaskUseCases",
    "UtilityAccountUseCases",
]
