"""Repository backends"""
from gsm.storage.base import Repository
from gsm.storage.json_store import JsonRepository
from gsm.storage.sql import SqlRepository


def make_repository(config):
    """Build the repository named by ``STORAGE_BACKEND``"""
    backend = config.get('STORAGE_BACKEND', 'sql')
    if backend == 'json':
        return JsonRepository(config['LOCAL_STORE_PATH'])
    if backend == 'sql':
        return SqlRepository()
    raise ValueError(f'Unknown storage backend: {backend}')


__all__ = ['Repository', 'JsonRepository', 'SqlRepository', 'make_repository']
