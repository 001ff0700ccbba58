"""Usage Mirror — behavioral analytics over manually logged app usage.

Pure, stateless engines that turn usage records into usage statistics,
a behavioral risk score, a digital honesty score, intention-vs-outcome
insights, a future-regret report and a before/after comparison.
"""

__version__ = "1.0.0"
