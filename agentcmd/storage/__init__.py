"""Storage module."""
from .models import CommandUsage
from .database import init_database, get_session, close_database
from .repository import UsageRepository
