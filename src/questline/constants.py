"""Tunable values shared by the progression systems."""

# Quiz countdown, in seconds of tick time, for every question.
QUESTION_TIME_LIMIT = 60.0
# Extra attempts allowed after a wrong or timed-out answer.
QUIZ_RETRY_CAP = 2
# Share of a question's feedback points kept on the 1st, 2nd and 3rd attempt.
ATTEMPT_CREDIT = (1.0, 0.5, 0.25)

# Points for a correct answer before any time bonus.
CORRECT_ANSWER_POINTS = 50
# (max elapsed seconds, bonus) in descending order of bonus.
ELAPSED_TIME_BONUS_TIERS = ((10.0, 30), (20.0, 20), (30.0, 10))
# (min fraction of the time limit remaining, bonus) for per-question feedback.
REMAINING_TIME_BONUS_TIERS = ((5 / 6, 30), (2 / 3, 20), (1 / 2, 10))

# Speed challenge buckets keyed by the elapsed seconds upper bound.
SPEED_EXCELLENT_MAX = 10.0
SPEED_GREAT_MAX = 20.0
SPEED_GOOD_MAX = 30.0

# Live snapshot re-validation cadence (seconds of tick time).
INTEGRITY_CHECK_INTERVAL = 30.0
# One playtime minute is credited per this many seconds of tick time.
PLAYTIME_TICK_SECONDS = 60.0

FORMAT_VERSION = "1.0.0"
STORAGE_KEY_PREFIX = "questline-progress:"
DEFAULT_TITLE = "Citizen"
