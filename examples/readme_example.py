import hashlib
import logging

from rowmodel import EventEmitter, Model, ModelContext, Repository, SQLiteBackend, transformer
from rowmodel.config import SQLiteSettings


class User(Model):
    table_name = "users"
    primary_key = "id"
    protected_fields = frozenset({"password"})

    @transformer("password")
    def hash_password(self, value: str) -> None:
        self.attributes["password"] = hashlib.sha256(value.encode()).hexdigest()


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)

    backend = SQLiteBackend.from_settings(SQLiteSettings(path=":memory:"))
    backend.execute(
        "CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT, age INTEGER, password TEXT, "
        "address TEXT, created_at TEXT, updated_at TEXT)"
    )

    emitter = EventEmitter()
    emitter.on("user.created", lambda user: print(f"created {user.to_json()}"))
    emitter.on("user.updated", lambda user: print(f"updated {user.to_json()}"))
    emitter.on("user.deleted", lambda user: print(f"deleted user {user['id']}"))

    users = Repository(User, ModelContext(backend=backend, emitter=emitter))

    user = users.create({"name": "ada", "age": 36, "password": "secret"})

    user["address.city"] = "London"
    user.set_attribute("age", 37)
    print(f"dirty: {user.get_mutated_attributes()}")
    user.save()

    # Nothing changed: no query, no event
    user.save()

    row = backend.fetch_one("users", "id", user["id"], json_fields=["address"])
    print(f"stored row: {row}")

    user.delete()
    backend.close()


if __name__ == "__main__":
    main()
