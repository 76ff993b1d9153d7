from spark_client.auth.authorizer import Authorizer

__all__ = ["Authorizer"]
