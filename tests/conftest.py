"""
Shared test config
"""

# Local
from kubeoverride.test_helpers.helpers import configure_logging

configure_logging()
