import os
from dataclasses import dataclass, field


# --- HELPER: Site addresses, read from the environment at call time ---
def read_site_urls():
    return {
        "site_a": os.environ.get("SITE_A_URL", "http://localhost:3001"),
        "site_b": os.environ.get("SITE_B_URL", "http://localhost:3002"),
    }


def read_supported_department():
    return os.environ.get("SUPPORTED_DEPARTMENT", "CS")


def read_site_timeout():
    return float(os.environ.get("SITE_TIMEOUT", "5"))


# Department served by the fragment sites
SUPPORTED_DEPARTMENT = read_supported_department()

# Where each fragment site listens (Site A: senior/advanced, Site B: junior/basic)
SITE_URLS = read_site_urls()

# Upper bound for every outbound site call, in seconds
SITE_TIMEOUT = read_site_timeout()

COORDINATOR_PORT = int(os.environ.get("COORDINATOR_PORT", "3000"))
SITE_PORTS = {
    "site_a": int(os.environ.get("SITE_A_PORT", "3001")),
    "site_b": int(os.environ.get("SITE_B_PORT", "3002")),
}

# Storage behind each fragment site
NODE_CONFIG = {
    "site_a": {
        "host": os.environ.get("SITE_A_DB_HOST", "localhost"),
        "user": os.environ.get("SITE_A_DB_USER", "admin"),
        "password": os.environ.get("SITE_A_DB_PASSWORD", "password123"),
        "database": os.environ.get("SITE_A_DB_NAME", "site_a"),
        "port": int(os.environ.get("SITE_A_DB_PORT", "3306")),
    },
    "site_b": {
        "host": os.environ.get("SITE_B_DB_HOST", "localhost"),
        "user": os.environ.get("SITE_B_DB_USER", "admin"),
        "password": os.environ.get("SITE_B_DB_PASSWORD", "password123"),
        "database": os.environ.get("SITE_B_DB_NAME", "site_b"),
        "port": int(os.environ.get("SITE_B_DB_PORT", "3306")),
    },
}


@dataclass
class CoordinatorConfig:
    """Everything the decision router needs to reach the fragment sites."""

    supported_department: str = SUPPORTED_DEPARTMENT
    site_urls: dict = field(default_factory=lambda: dict(SITE_URLS))
    timeout: float = SITE_TIMEOUT

    @classmethod
    def from_env(cls):
        return cls(
            supported_department=read_supported_department(),
            site_urls=read_site_urls(),
            timeout=read_site_timeout(),
        )
