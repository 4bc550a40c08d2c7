from __future__ import annotations

from dataclasses import dataclass

from .core.enums import HoursPolicy
from .database.connection import DatabaseConnection, DBConfig
from .stats.aggregator import StatsAggregator
from .timelogs.factory import HoursCalculatorFactory
from .timelogs.mysql_timelog_repository import MySQLTimeSessionRepository
from .timelogs.service import TimeLogService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    sessions_repo: MySQLTimeSessionRepository

    timelog_service: TimeLogService


def build_container(*, db_config: dict, hours_policy: HoursPolicy | str = HoursPolicy.BREAK_SUBTRACTION) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    sessions_repo = MySQLTimeSessionRepository(conn)

    calculator = HoursCalculatorFactory().for_policy(hours_policy)
    timelog_service = TimeLogService(
        sessions_repo,
        calculator=calculator,
        aggregator=StatsAggregator(calculator.policy),
    )

    return Container(
        conn=conn,
        sessions_repo=sessions_repo,
        timelog_service=timelog_service,
    )
