from __future__ import annotations
from typing import Any, Dict, List
import json

from riskpaths.reports.client import ClientProfile, SelectedRisk

SYSTEM_PROMPT = (
    "You are an expert Chief Risk Officer with deep knowledge of ESG risks, credit risk assessment, "
    "and financial analysis. Provide detailed, actionable insights."
)


def build_report_prompt(report_input: Dict[str, Any]) -> str:
    """CRO report prompt over a ``{"reportInputData": [...]}`` payload."""
    data = json.dumps(report_input, indent=2, ensure_ascii=False)
    return f"""You are a Chief Risk Officer creating a comprehensive ESG-to-Credit Risk Assessment Report.

MATERIALITY ASSESSMENT DATA:
{data}

Generate a detailed HTML-formatted report that includes:

1. **Executive Summary** - Key findings about material ESG risks and their credit implications
2. **Risk Pathway Analysis** - Detailed analysis of each identified risk pathway and transmission channels
3. **PD Adjustment Framework** - Specific data points and KPIs needed for probability of default adjustments
4. **Implementation Roadmap** - Step-by-step guidance for integrating these risks into credit decisions
5. **Monitoring Dashboard** - Key metrics and indicators to track ongoing risk exposure

Focus on actionable insights that help the CRO understand exactly how these ESG risks impact credit decisions and what concrete steps are needed.

Format the response in clean HTML with proper headings, lists, and structure. Use professional language suitable for C-suite executives."""


def _available(flag: bool) -> str:
    return "Available" if flag else "Not provided"


def build_client_analysis_prompt(client: ClientProfile, risks: List[SelectedRisk]) -> str:
    lines: List[str] = [
        "You are a Chief Risk Officer analyzing a client for ESG transition risks that may impact "
        "credit risk and PD adjustment.",
        "",
        "CLIENT INFORMATION:",
        f"- Company: {client.client_name}",
        f"- NACE Code: {client.nace_code}",
        f"- Financial Statements: {_available(client.has_financial_statements)}",
        f"- Climate Reports: {_available(client.has_climate_reports)}",
        "",
        "MATERIAL RISK DEPENDENCIES SELECTED BY BANK:",
    ]
    for r in risks:
        dep = r.dependency
        lines += [
            f"- {dep.title} ({r.category} → {r.subcategory})",
            f"  TFM Metric: {dep.tfm_metric}",
            f"  Rationale: {r.rationale or 'No rationale provided'}",
            f"  Transmission Channels: {len(dep.transmission_channels)}",
        ]
    lines += ["", "TRANSMISSION CHANNELS & DATA REQUIREMENTS:"]
    for r in risks:
        for ch in r.dependency.transmission_channels:
            lines += [
                f"  {r.dependency.title} → {ch.description}",
                f"  Impact: {ch.quantified_impact}",
                f"  PD Driver: {ch.pd_driver}",
                "  Required Data Points for PD Adjustment:",
            ]
            lines += [f"    • {point}" for point in ch.data_requirement.data_points]
    lines += [
        "",
        "Based on this client and the selected material risks, generate a comprehensive "
        "ESG-to-Credit Risk Assessment Report that includes:",
        "",
        "1. **Executive Summary** - Key findings about which material risks apply to this specific client",
        "2. **Risk Pathway Analysis** - Which of the selected risks are most relevant to this client and why",
        "3. **PD Adjustment Requirements** - Specific data points that need to be collected for each "
        "relevant transmission channel",
        "4. **KPI Monitoring Framework** - Key metrics to track for ongoing risk management",
        "5. **Actionable Recommendations** - Next steps for the CRO to integrate these risks into credit decisions",
        "",
        "Format the response in HTML with proper headings and structure.",
    ]
    return "\n".join(lines)
