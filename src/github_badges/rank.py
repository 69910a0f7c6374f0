"""Percentile rank model for the stats card.

Each input is squashed into [0, 1] by a CDF-like transform relative to a
median, the transforms are averaged with fixed weights, and the complement is
reported as a percentile. Lower percentiles are better: S is the top grade.
"""

from github_badges.models.stats import RankInputs, RankResult

COMMITS_WEIGHT = 2
PRS_MEDIAN, PRS_WEIGHT = 50, 3
ISSUES_MEDIAN, ISSUES_WEIGHT = 25, 1
REVIEWS_MEDIAN, REVIEWS_WEIGHT = 2, 1
STARS_MEDIAN, STARS_WEIGHT = 50, 4
FOLLOWERS_MEDIAN, FOLLOWERS_WEIGHT = 10, 1

TOTAL_WEIGHT = (
    COMMITS_WEIGHT
    + PRS_WEIGHT
    + ISSUES_WEIGHT
    + REVIEWS_WEIGHT
    + STARS_WEIGHT
    + FOLLOWERS_WEIGHT
)

THRESHOLDS = (1, 12.5, 25, 37.5, 50, 62.5, 75, 87.5, 100)
LEVELS = ("S", "A+", "A", "A-", "B+", "B", "B-", "C+", "C")


def commits_median(all_commits: bool) -> int:
    """Median commit count; all-time counts are compared against a higher bar."""
    return 1000 if all_commits else 250


def exponential_cdf(x: float) -> float:
    return 1 - 2 ** -x


def log_normal_cdf(x: float) -> float:
    # Approximation: x / (1 + x) on a median-scaled input
    return x / (1 + x)


def level_for(percentile: float) -> str:
    """Map a percentile to its letter grade."""
    for threshold, level in zip(THRESHOLDS, LEVELS):
        if percentile <= threshold:
            return level
    return LEVELS[-1]


def calculate_rank(inputs: RankInputs, all_commits: bool = True) -> RankResult:
    """Calculate the user's rank from their GitHub counts.

    Args:
        inputs: Commit, PR, issue, review, star and follower counts
        all_commits: Whether total_commits covers all time (raises the median)

    Returns:
        RankResult with the letter level and percentile in [0, 100]
    """
    score = (
        COMMITS_WEIGHT * exponential_cdf(inputs.total_commits / commits_median(all_commits))
        + PRS_WEIGHT * exponential_cdf(inputs.prs / PRS_MEDIAN)
        + ISSUES_WEIGHT * exponential_cdf(inputs.issues / ISSUES_MEDIAN)
        + REVIEWS_WEIGHT * exponential_cdf(inputs.reviews / REVIEWS_MEDIAN)
        + STARS_WEIGHT * log_normal_cdf(inputs.stars / STARS_MEDIAN)
        + FOLLOWERS_WEIGHT * log_normal_cdf(inputs.followers / FOLLOWERS_MEDIAN)
    )

    rank = 1 - score / TOTAL_WEIGHT
    percentile = min(max(rank * 100, 0.0), 100.0)

    return RankResult(level=level_for(percentile), percentile=percentile)
