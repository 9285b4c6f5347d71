from .mongodb_client import MongoDBClient

__all__ = ['MongoDBClient']
