"""Company domain service."""

from decimal import Decimal
from typing import Optional

from timebill.database.base import Database
from timebill.domain.entities import Company
from timebill.domain.errors import ConflictError, NotFoundError, ValidationError, entity_not_found


def _check_day(name: str, value: Optional[int]) -> None:
    if value is not None and not 1 <= value <= 31:
        raise ValidationError(f"{name} must be between 1 and 31 (got {value})")


class CompanyService:
    """Service for managing companies and their billing cycle."""

    def __init__(self, db: Database):
        """Initialize company service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_company(
        self,
        name: str,
        billing_start_day: Optional[int] = None,
        billing_end_day: Optional[int] = None,
        daily_hours: Optional[Decimal] = None,
    ) -> str:
        """Create a new company.

        Args:
            name: Company name
            billing_start_day: First day of the billing cycle (1..31)
            billing_end_day: Last day of the billing cycle (1..31)
            daily_hours: Default work hours per day for schedules

        Returns:
            Company ID

        Raises:
            ConflictError: If a company with that name exists
            ValidationError: If a billing day is out of range
        """
        _check_day("Billing start day", billing_start_day)
        _check_day("Billing end day", billing_end_day)
        for company in self.db.list_companies():
            if company.name == name:
                raise ConflictError(f"Company with name '{name}' already exists")

        return self.db.create_company(
            name=name,
            billing_start_day=billing_start_day,
            billing_end_day=billing_end_day,
            daily_hours=daily_hours,
        )

    def get_company(self, company_id: str) -> Optional[Company]:
        """Get company by ID."""
        return self.db.get_company(company_id)

    def list_companies(self) -> list[Company]:
        """List all companies."""
        return self.db.list_companies()

    def resolve_company(self, company: str) -> str:
        """Resolve a company name or ID to its ID.

        Raises:
            NotFoundError: If no company matches
        """
        if self.db.get_company(company) is not None:
            return company
        for candidate in self.db.list_companies():
            if candidate.name == company:
                return candidate.id
        raise NotFoundError(f"Company '{company}' not found")

    def update_billing(
        self,
        company_id: str,
        billing_start_day: Optional[int],
        billing_end_day: Optional[int],
        daily_hours: Optional[Decimal] = None,
    ) -> None:
        """Change a company's billing cycle days and daily hours.

        Raises:
            NotFoundError: If the company doesn't exist
            ValidationError: If a billing day is out of range
        """
        if self.db.get_company(company_id) is None:
            raise NotFoundError(entity_not_found("Company", company_id))
        _check_day("Billing start day", billing_start_day)
        _check_day("Billing end day", billing_end_day)
        self.db.update_company_billing(
            company_id,
            billing_start_day=billing_start_day,
            billing_end_day=billing_end_day,
            daily_hours=daily_hours,
        )
