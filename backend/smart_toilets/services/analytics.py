"""Service layer — aggregates over the facility store and simulated image analysis.

Nothing here touches the network; the analytics are computed from the
in-memory records and the image "analysis" is a random draw.
"""

from typing import Iterable

from smart_toilets.generator import RandomSource, cleanliness_score, one_decimal
from smart_toilets.schemas.facility import Analytics, Facility, ImageAnalysis, StaticFacts

STATIC_FACTS = StaticFacts()

# Scores below this need attention
CLEANLINESS_THRESHOLD = 5


def compute_analytics(
    facilities: Iterable[Facility],
    facts: StaticFacts = STATIC_FACTS,
) -> Analytics:
    """Aggregate the current facility readings and attach the static facts."""
    facilities = list(facilities)
    total = len(facilities)

    active = sum(1 for f in facilities if f.status == "active")
    rating_sum = sum(float(f.user_rating) for f in facilities)
    average = rating_sum / total if total else 0.0

    return Analytics(
        total_facilities=total,
        active_facilities=active,
        average_rating=one_decimal(average),
        total_daily_users=sum(f.daily_users for f in facilities),
        alert_count=sum(len(f.alerts) for f in facilities),
        cost_savings=facts.cost_savings,
        maintenance_stats=facts.maintenance_stats,
    )


def analyze_image(rng: RandomSource) -> ImageAnalysis:
    """Produce a fake cleanliness assessment for an uploaded photo."""
    score = cleanliness_score(rng)
    if score < CLEANLINESS_THRESHOLD:
        issues = ["Needs cleaning", "Low supplies"]
        recommendation = "Immediate cleaning required"
    else:
        issues = ["Good condition"]
        recommendation = "Maintain current standards"

    return ImageAnalysis(
        cleanliness_score=score,
        confidence="94%",
        issues=issues,
        recommendation=recommendation,
        analysis_time="2.3 seconds",
    )
