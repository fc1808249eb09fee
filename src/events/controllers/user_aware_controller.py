import typing as t

from ninja_extra import ControllerBase

from accounts.models import Member


class UserAwareController(ControllerBase):
    def user(self) -> Member:
        """Get the authenticated member for this request."""
        return t.cast(Member, self.context.request.user)  # type: ignore[union-attr]
