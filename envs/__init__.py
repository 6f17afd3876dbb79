from .splendor_env import SplendorEnv, build_action_catalogue, env

__all__ = ['SplendorEnv', 'build_action_catalogue', 'env']
