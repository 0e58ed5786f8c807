"""
Service identity bound to every log record: `SERVICE_NAME@DEPLOY_ENV:instance`.

The instance is the container hostname when running under an orchestrator
(HOSTNAME is set and differs from the local machine name), otherwise the PID.
"""

import os
import socket
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'event-inventory')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    hostname = os.getenv('HOSTNAME', '')
    if hostname and hostname != socket.gethostname():
        instance = hostname[:12]
    else:
        instance = str(os.getpid())

    return f'{service_name}@{deploy_env}:{instance}'
