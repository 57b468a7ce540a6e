"""dataverse-client: scripted access to a Dataverse installation's native API."""

__version__ = "0.1.0"

# Dataverse categories accepted by the service
DATAVERSE_TYPES = [
    "DEPARTMENT",
    "JOURNALS",
    "LABORATORY",
    "ORGANIZATIONS_INSTITUTIONS",
    "RESEARCHERS",
    "RESEARCH_GROUP",
    "RESEARCH_PROJECTS",
    "TEACHING_COURSES",
    "UNCATEGORIZED",
]
DEFAULT_DATAVERSE_TYPE = "UNCATEGORIZED"

# Dataset version aliases (besides explicit "major.minor")
VERSION_LATEST = ":latest"
VERSION_LATEST_PUBLISHED = ":latest-published"
VERSION_DRAFT = ":draft"
VERSION_ALIASES = [VERSION_LATEST, VERSION_LATEST_PUBLISHED, VERSION_DRAFT]
