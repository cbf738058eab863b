"""
LocalPros Backend — ORM Models
================================

Importing this package registers every table on `Base.metadata`, which is
what Alembic autogenerate and `init_models()` read.
"""

from localpros.models.portfolio import PortfolioImage
from localpros.models.rating import Rating
from localpros.models.service_request import ServiceRequest
from localpros.models.user import User

__all__ = ["PortfolioImage", "Rating", "ServiceRequest", "User"]
