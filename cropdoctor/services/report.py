"""Plain-text diagnosis report and share message."""
from datetime import datetime
from typing import List, Optional

from cropdoctor.models.diagnosis import Diagnosis
from cropdoctor.services.cost import CURRENCY
from cropdoctor.services.research import ResearchResult


def build_report(
    diagnosis: Diagnosis,
    offline: bool,
    research: Optional[List[ResearchResult]] = None,
    generated_at: Optional[datetime] = None,
) -> str:
    generated_at = generated_at or datetime.now()
    mode = "Offline (Local AI)" if offline else "Online (Cloud AI)"

    lines = [
        "CROP DISEASE DIAGNOSIS REPORT",
        "==============================",
        "",
        f"Disease ID: {diagnosis.id}",
        f"Disease Name: {diagnosis.name}",
        f"Crop Type: {diagnosis.crop}",
        f"Confidence: {diagnosis.confidence}%",
        f"Severity: {diagnosis.severity.value}",
        f"Analysis Mode: {mode}",
        "",
        "DESCRIPTION:",
        diagnosis.description,
        "",
        "KEY SYMPTOMS:",
    ]
    lines += [f"{i}. {s}" for i, s in enumerate(diagnosis.symptoms, 1)]
    lines += ["", "RECOMMENDED TREATMENTS:"]
    for i, t in enumerate(diagnosis.treatments, 1):
        lines += [
            "",
            f"{i}. {t.name} ({t.category.value})",
            f"   Effectiveness: {t.effectiveness.value}",
            f"   Cost: {CURRENCY} {t.cost_per_acre:g}/acre",
            f"   Application: {t.application}",
            f"   Instructions: {t.instructions}",
        ]

    if research:
        lines += ["", "ONLINE RESEARCH SOURCES:"]
        lines += [f"{i}. {r.title} - {r.source}" for i, r in enumerate(research, 1)]

    lines += ["", f"Generated: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}"]
    return "\n".join(lines)


def build_share_text(diagnosis: Diagnosis) -> str:
    return (
        f"Crop Disease Detected: {diagnosis.name}\n"
        f"Severity: {diagnosis.severity.value}\n"
        f"Confidence: {diagnosis.confidence}%\n\n"
        "View full diagnosis report for treatment options."
    )
