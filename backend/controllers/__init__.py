from controllers import coach, pages

__all__ = ["coach", "pages"]
