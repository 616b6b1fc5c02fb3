from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .attendance.aggregator import AttendanceAggregator
from .attendance.mysql_mark_repository import MySQLMarkRepository
from .attendance.repository import MarkRepository
from .checkin.service import CheckinIngestionService
from .common.datetime_utils import TimeZoneBucketing, utc_now
from .compliance.calculator.standard_calculator import StandardComplianceCalculator
from .compliance.service import ComplianceReportService
from .core.constants import ACCURACY_CEILING_M, POLICY_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .evidence.blob_store import BlobStore, LocalBlobStore
from .people.mysql_person_repository import MySQLPersonRepository
from .people.repository import PersonRepository
from .sites.geofence import SiteGeofenceValidator
from .sites.mysql_site_repository import MySQLSiteRepository
from .sites.repository import SiteRepository
from .sites.service import SiteLocator
from .tokens.mysql_token_repository import MySQLAccessTokenRepository
from .tokens.repository import AccessTokenRepository
from .tokens.service import AccessTokenService, AccessTokenValidator


@dataclass(frozen=True)
class Container:
    people_repo: PersonRepository
    sites_repo: SiteRepository
    tokens_repo: AccessTokenRepository
    marks_repo: MarkRepository
    blob_store: BlobStore

    bucketing: TimeZoneBucketing
    clock: Callable[[], datetime]

    checkin_service: CheckinIngestionService
    token_service: AccessTokenService
    report_service: ComplianceReportService
    site_locator: SiteLocator

    conn: Optional[DatabaseConnection] = None


def build_services(
    *,
    people: PersonRepository,
    sites: SiteRepository,
    tokens: AccessTokenRepository,
    marks: MarkRepository,
    blobs: BlobStore,
    timezone_name: str = POLICY_TIMEZONE,
    accuracy_ceiling_m: float = ACCURACY_CEILING_M,
    clock: Callable[[], datetime] = utc_now,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over any repository implementations (MySQL or in-memory)."""
    bucketing = TimeZoneBucketing(timezone_name)
    aggregator = AttendanceAggregator(bucketing)

    checkin_service = CheckinIngestionService(
        people,
        sites,
        marks,
        blobs,
        geofence=SiteGeofenceValidator(accuracy_ceiling_m=accuracy_ceiling_m),
        tokens=AccessTokenValidator(tokens),
        clock=clock,
    )
    token_service = AccessTokenService(people, sites, tokens, clock=clock)
    report_service = ComplianceReportService(
        marks,
        people,
        sites,
        aggregator=aggregator,
        calculator=StandardComplianceCalculator(bucketing),
    )

    return Container(
        people_repo=people,
        sites_repo=sites,
        tokens_repo=tokens,
        marks_repo=marks,
        blob_store=blobs,
        bucketing=bucketing,
        clock=clock,
        checkin_service=checkin_service,
        token_service=token_service,
        report_service=report_service,
        site_locator=SiteLocator(sites),
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    evidence_dir: str,
    timezone_name: str = POLICY_TIMEZONE,
    accuracy_ceiling_m: float = ACCURACY_CEILING_M,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        connection_timeout=int(db_config.get("connection_timeout", 5)),
    )
    conn = DatabaseConnection.get_instance(config)

    return build_services(
        people=MySQLPersonRepository(conn),
        sites=MySQLSiteRepository(conn),
        tokens=MySQLAccessTokenRepository(conn),
        marks=MySQLMarkRepository(conn),
        blobs=LocalBlobStore(evidence_dir),
        timezone_name=timezone_name,
        accuracy_ceiling_m=accuracy_ceiling_m,
        conn=conn,
    )
