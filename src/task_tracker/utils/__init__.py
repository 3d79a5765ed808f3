from .env import env_float, env_int, load_local_env

__all__ = ["env_float", "env_int", "load_local_env"]
