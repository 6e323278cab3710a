#-------------------------------------------------------------------------bh-
#-------------------------------------------------------------------------eh-

from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, Text, TIMESTAMP, Index, text
)
from sqlalchemy.orm import relationship, declarative_base, declared_attr


#-------------------------------------------------------------------------bm-
Base = declarative_base()

# ============================================================================
# Mixins - Common patterns extracted
# ============================================================================
class TimestampMixin:
    """Provides creation and modification timestamps."""

    @declared_attr
    def creation_time(cls):
        return Column(DateTime, nullable=False, default=datetime.now, server_default=text('CURRENT_TIMESTAMP'))

    @declared_attr
    def modified_time(cls):
        return Column(TIMESTAMP, server_default=text('CURRENT_TIMESTAMP'), onupdate=datetime.now)
