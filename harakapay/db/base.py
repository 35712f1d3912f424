from harakapay.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from harakapay.models.user_preferences import UserPreferences  # noqa: F401
