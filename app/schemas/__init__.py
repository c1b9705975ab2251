"""Pydantic schemas for the Strukture API."""

from app.schemas.base import *
from app.schemas.auth import *
from app.schemas.property import *
from app.schemas.lease import *
from app.schemas.payment import *
from app.schemas.maintenance import *
from app.schemas.notification import *
from app.schemas.onboarding import *
from app.schemas.tenant import *
