"""
Service context for log lines.

Identifies which process wrote a line when several request handlers
share one log stream.
"""

from functools import lru_cache
import os


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'seat-reservation-engine')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # Container hosts expose a hostname that is more useful than the pid
    instance_id = os.getenv('HOSTNAME', '')[:12] or str(os.getpid())

    return f'{service_name}@{deploy_env}:{instance_id}'
