"""
Static plan catalog

Only the product tier of each plan is needed to decide who may sponsor and
who may be sponsored.
"""

from src.domain.entities import Organization, PlanSponsorshipType, PlanType, ProductType

PLAN_PRODUCTS = {
    PlanType.free: ProductType.free,
    PlanType.families_annually: ProductType.families,
    PlanType.teams_monthly: ProductType.teams,
    PlanType.teams_annually: ProductType.teams,
    PlanType.enterprise_monthly: ProductType.enterprise,
    PlanType.enterprise_annually: ProductType.enterprise,
}

# sponsorship type -> (product required to sponsor, product that can be sponsored)
SPONSORED_PLANS = {
    PlanSponsorshipType.families_for_enterprise: (
        ProductType.enterprise,
        ProductType.families,
    ),
}


def get_product(plan_type: PlanType) -> ProductType:
    return PLAN_PRODUCTS[plan_type]


def organization_can_sponsor(
    organization: Organization,
    self_hosted: bool,
    sponsorship_type: PlanSponsorshipType = PlanSponsorshipType.families_for_enterprise,
) -> bool:
    """Sponsoring requires the qualifying product tier on a cloud installation."""
    if self_hosted:
        return False
    sponsoring_product, _ = SPONSORED_PLANS[sponsorship_type]
    return get_product(organization.plan_type) == sponsoring_product


def organization_can_be_sponsored(
    organization: Organization, sponsorship_type: PlanSponsorshipType
) -> bool:
    _, sponsored_product = SPONSORED_PLANS[sponsorship_type]
    return get_product(organization.plan_type) == sponsored_product
