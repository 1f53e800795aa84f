from __future__ import annotations
from typing import Tuple

from riskpaths.taxonomy.models import (
    DataRequirement,
    RiskCategory,
    RiskDependency,
    RiskSubcategory,
    TaxonomyPathway,
    TransmissionChannel,
)

# Flat risk pathways used by the matching engine. Order is significant: matches
# are emitted in this order.
EMBEDDED_RISK_TAXONOMY: Tuple[TaxonomyPathway, ...] = (
    TaxonomyPathway(
        path_id="PATH_001",
        dependency="Client reliance on subsidies or tax credits for survival",
        impact=(
            "Direct financial shortfall in transition CAPEX funding, Higher cost of capital and leverage "
            "pressure, delayed transition readiness, reduced competitiveness against subsidized peers, loss "
            "of green product labelling and customer preference, missed access to blended finance "
            "structures, legal and reputational exposure"
        ),
        transition_risk=(
            "Business model risk, technology obsolescence risk, policy and regulatory risk, market risk, "
            "credit risk deterioration, reputational and stakeholder risk, strategic planning risk, "
            "liquidity and refinancing risk"
        ),
        transmission_channel=(
            "Revenue contraction due to lost green offer → Lower turnover → Impacts revenue growth and "
            "volatility. Margin compression from commoditization → decreased gross margin and contribution "
            "margin → impacts EBITDA margin and lowers cash flow resilience. Loss of product pricing power → "
            "lower contribution per unit → impacts the ROA and the operational leverage. Drop in green "
            "procurement eligibility → decrease in qualified revenue streams and increase in volatility → "
            "impacts revenue stability and earnings volatility. Loss of ESG-sensitive customers → decrease in "
            "customer diversification and loss of key accounts → impacts customer concentration which impacts "
            "PD. Strategic asset stranding → decrease book-to-market ratio and increases impairments → impacts "
            "asset quality which impacts PD and LGD. Lower NPV of business unit → decreases future "
            "profitability and value erosion → impacts discounted cashflows"
        ),
        financial_effect="Loss of eligibility for tax credits or subsidies due to environmental non-compliance",
        credit_risk=(
            "PD deterioration through multiple transmission channels affecting revenue stability, margin "
            "compression, asset quality, and cash flow resilience"
        ),
        kpis=(
            "Revenue growth and volatility",
            "EBITDA margin",
            "ROA",
            "Operational leverage",
            "Customer concentration ratio",
            "Asset quality metrics",
            "Book-to-market ratio",
            "Discounted cash flows",
        ),
    ),
)


def _channel(id: str, description: str, impact: str, pd_driver: str,
             requirement: str, *data_points: str) -> TransmissionChannel:
    return TransmissionChannel(
        id=id,
        description=description,
        quantified_impact=impact,
        pd_driver=pd_driver,
        data_requirement=DataRequirement(description=requirement, data_points=tuple(data_points)),
    )


HIERARCHICAL_RISK_TAXONOMY: Tuple[RiskCategory, ...] = (
    RiskCategory(
        id="regulatory-misalignment",
        title="Regulatory Misalignment",
        subcategories=(
            RiskSubcategory(
                id="subsidy-dependency",
                title="Client reliance on subsidies or tax credits for survival",
                dependencies=(
                    RiskDependency(
                        id="loss-of-eligibility",
                        title="Loss of eligibility for tax credits or subsidies due to environmental non-compliance",
                        description=(
                            "Client loses access to government subsidies or tax credits due to failure to meet "
                            "environmental compliance requirements, leading to direct financial impact and "
                            "reduced competitiveness."
                        ),
                        tfm_metric="Exposure of client to national subsidies or tax credits",
                        transmission_channels=(
                            _channel(
                                "revenue-contraction",
                                "Revenue contraction due to lost green offer",
                                "Lower turnover",
                                "Impacts revenue growth and volatility",
                                "Revenue impact from loss of green product offerings",
                                "Current period total turnover", "Prior period total turnover", "ESG revenue segment",
                            ),
                            _channel(
                                "margin-compression",
                                "Margin compression from commoditization",
                                "Decreased gross margin and contribution margin",
                                "Impacts EBITDA margin and lowers cash flow resilience",
                                "Profitability metrics showing margin deterioration",
                                "Gross margin or EBITDA margin",
                            ),
                            _channel(
                                "pricing-power-loss",
                                "Loss of product pricing power",
                                "Lower contribution per unit",
                                "Impacts the ROA and the operational leverage",
                                "Unit economics and pricing power metrics",
                                "Contribution margin per unit (selling price - variable cost)",
                            ),
                            _channel(
                                "green-procurement-drop",
                                "Drop in green procurement eligibility",
                                "Decrease in qualified revenue streams and increase in volatility",
                                "Impacts revenue stability and earnings volatility",
                                "Green revenue segment analysis",
                                "Revenue from green buyers or compliant products", "Total revenue for normalization",
                            ),
                            _channel(
                                "npv-decline",
                                "NPV decline of core business unit",
                                "Decreases future profitability and value erosion",
                                "Impacts discounted cash flows",
                                "Business unit valuation changes over time",
                                "NPV of forecasted FCF of key business segments (in two different times)",
                            ),
                            _channel(
                                "asset-stranding",
                                "Strategic asset stranding risk",
                                "Decrease book-to-market ratio and increases impairments",
                                "Impacts asset quality which impacts PD and LGD",
                                "Asset impairment and stranding metrics",
                                "Impaired asset value", "Total fixed assets",
                            ),
                            _channel(
                                "esg-customer-loss",
                                "Loss of ESG-sensitive clients",
                                "Decrease in customer diversification and loss of key accounts",
                                "Impacts customer concentration which impacts PD",
                                "Customer concentration and ESG-sensitive revenue analysis",
                                "Lost revenue from top 5 ESG buyers", "Total revenue",
                            ),
                        ),
                    ),
                ),
            ),
        ),
    ),
)
