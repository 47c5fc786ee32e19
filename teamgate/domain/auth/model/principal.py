"""Principal: the already-identified user a request acts for."""

from dataclasses import dataclass

from teamgate.domain.auth.model.identity import Identity
from teamgate.domain.auth.model.user import User
from teamgate.domain.auth.model.value import UserId


@dataclass(frozen=True)
class Principal(Identity):
    """The identified requester.

    Authentication happens upstream; by the time a Principal exists the user
    record has been loaded. Subclasses Identity so it can be used wherever
    Identity is expected.
    """

    user: User

    @property
    def user_id(self) -> UserId:
        return self.user.id
