"""
Business Profile Service.

Handles business profile lookup, default creation, updates and small
business eligibility. A missing profile is reported distinctly from an
empty one: reports refuse to run without a profile.
"""
import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from taxledger.core.exceptions import InvalidProfileError, ProfileNotFoundError
from taxledger.models.ledger import BusinessProfile
from taxledger.models.schemas.records import (
    DEFAULT_NHF_RATE,
    DEFAULT_PENSION_RATE,
    BusinessProfileData,
    BusinessProfileUpdate,
)
from taxledger.services.tax_engine import is_small_business_exempt
from taxledger.services.tax_engine.constants import (
    CIT_EXEMPTION_FIXED_ASSETS,
    CIT_EXEMPTION_TURNOVER,
)

logger = logging.getLogger(__name__)

# Buffers for flagging a business that is close to losing the exemption
TURNOVER_WARNING_BUFFER = Decimal("10000000")  # ₦10M
ASSETS_WARNING_BUFFER = Decimal("25000000")    # ₦25M


class ProfileService:
    """
    Manage business profiles.

    Responsibilities:
    - Profile lookup and immutable snapshots for tax computation
    - Default profile creation at onboarding
    - Validated profile updates
    - Small business eligibility summary
    """

    def __init__(self, db: Session):
        self.db = db

    def get_profile(self, user_id: int) -> Optional[BusinessProfile]:
        """Return the user's profile, or None when it does not exist."""
        return self.db.execute(
            select(BusinessProfile).where(BusinessProfile.user_id == user_id)
        ).scalar_one_or_none()

    def require_profile(self, user_id: int) -> BusinessProfileData:
        """
        Snapshot of the user's profile for one computation.

        Raises:
            ProfileNotFoundError: If the user has no profile
        """
        profile = self.get_profile(user_id)
        if profile is None:
            logger.warning(f"Tax computation requested without profile for user {user_id}")
            raise ProfileNotFoundError(user_id)
        return BusinessProfileData.model_validate(profile)

    def ensure_profile(self, user_id: int, full_name: Optional[str] = None) -> BusinessProfile:
        """
        Get existing profile or create a zero-valued default one.

        Args:
            user_id: User ID
            full_name: Optional display name for the new profile

        Returns:
            BusinessProfile instance
        """
        profile = self.get_profile(user_id)
        if profile:
            return profile

        logger.info(f"Creating default business profile for user {user_id}")
        profile = BusinessProfile(
            user_id=user_id,
            full_name=full_name or "",
            business_name="",
            annual_turnover=Decimal("0"),
            fixed_assets=Decimal("0"),
            pension_rate=DEFAULT_PENSION_RATE,
            nhf_rate=DEFAULT_NHF_RATE,
            tax_year=date.today().year,
            onboarding_complete=False,
        )
        self.db.add(profile)
        self.db.commit()
        self.db.refresh(profile)
        return profile

    def update_profile(
        self,
        user_id: int,
        data: Union[BusinessProfileUpdate, Dict[str, Any]],
    ) -> BusinessProfile:
        """
        Apply a validated update, creating the profile first if needed.

        Args:
            user_id: User ID
            data: Fields to update; unset fields are left alone

        Returns:
            Updated BusinessProfile

        Raises:
            InvalidProfileError: If a raw dict carries an out-of-range value
        """
        if not isinstance(data, BusinessProfileUpdate):
            try:
                data = BusinessProfileUpdate.model_validate(data)
            except ValidationError as e:
                error = e.errors()[0]
                field = ".".join(str(part) for part in error["loc"]) or "profile"
                raise InvalidProfileError(field, error["msg"]) from e

        profile = self.ensure_profile(user_id)

        changes = data.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(profile, field, value)
        profile.updated_at = datetime.now(timezone.utc)

        self.db.commit()
        self.db.refresh(profile)

        logger.info(
            f"Business profile updated for user {user_id}: "
            f"fields={', '.join(sorted(changes)) or 'none'}"
        )
        return profile

    def check_small_business_eligibility(self, user_id: int) -> Dict[str, Any]:
        """
        Check whether the user qualifies for the small business CIT exemption.

        Returns:
            Dictionary with eligibility, headroom under each threshold, and
            whether the business is approaching either limit
        """
        snapshot = self.require_profile(user_id)
        eligible = is_small_business_exempt(snapshot.annual_turnover, snapshot.fixed_assets)

        turnover_remaining = CIT_EXEMPTION_TURNOVER - snapshot.annual_turnover
        assets_remaining = CIT_EXEMPTION_FIXED_ASSETS - snapshot.fixed_assets

        return {
            "eligible": eligible,
            "current_turnover": snapshot.annual_turnover,
            "turnover_limit": CIT_EXEMPTION_TURNOVER,
            "turnover_remaining": turnover_remaining if eligible else Decimal("0"),
            "current_assets": snapshot.fixed_assets,
            "assets_limit": CIT_EXEMPTION_FIXED_ASSETS,
            "assets_remaining": assets_remaining if eligible else Decimal("0"),
            "approaching_limit": (
                turnover_remaining < TURNOVER_WARNING_BUFFER
                or assets_remaining < ASSETS_WARNING_BUFFER
            ) if eligible else False,
        }
