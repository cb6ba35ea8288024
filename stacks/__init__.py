from .my_app_stack import MyAppStack

__all__ = ["MyAppStack"]
