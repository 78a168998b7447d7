import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    """'<service>@<env>:<instance>' tag stamped on every log line."""
    service_name = os.getenv('SERVICE_NAME', 'checkout')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # container hostname when running in a pod / compose, PID otherwise
    instance = os.getenv('HOSTNAME', '')[:12] or str(os.getpid())
    return f'{service_name}@{deploy_env}:{instance}'
