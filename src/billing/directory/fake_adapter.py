"""In-memory directory adapters for development and tests."""

from billing.directory.port import LocationConfig, LocationDirectory, User, UserDirectory


class InMemoryUserDirectory(UserDirectory):
    def __init__(self) -> None:
        self.users: dict[tuple[str, str], User] = {}
        self.calls: list[dict] = []

    def add_user(self, user: User) -> User:
        self.users[(str(user.location_id), str(user.id))] = user
        return user

    def load_user(self, location_id: str, user_id: str, include_deleted: bool = False) -> User | None:
        self.calls.append(
            {
                "method": "load_user",
                "location_id": location_id,
                "user_id": user_id,
                "include_deleted": include_deleted,
            }
        )
        user = self.users.get((str(location_id), str(user_id)))
        if user is None or (user.deleted and not include_deleted):
            return None
        return user


class InMemoryLocationDirectory(LocationDirectory):
    def __init__(self) -> None:
        self.locations: dict[str, LocationConfig] = {}

    def add_location(self, location: LocationConfig) -> LocationConfig:
        self.locations[str(location.id)] = location
        return location

    def load_location(self, location_id: str) -> LocationConfig | None:
        return self.locations.get(str(location_id))
