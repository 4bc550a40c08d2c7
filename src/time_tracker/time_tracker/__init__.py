"""Employee Time Tracker package.

Feature modules (timelogs, stats) keep the business rules in plain services,
strategies and repositories; Flask controllers are a thin layer on top.
"""
