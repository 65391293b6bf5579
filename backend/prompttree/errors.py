"""Domain errors shared by the store, the services and the routers.

Routers translate these into HTTP status codes:
ValidationError -> 400, NotFoundError -> 404, PersistError -> 500.
"""


class ValidationError(Exception):
    """Bad or missing input. Raised before any storage call."""


class PersistError(Exception):
    """A store read, write or transaction failed."""


class NotFoundError(Exception):
    """Base class for absent entities."""


class PromptNotFoundError(NotFoundError):
    def __init__(self, prompt_id: int) -> None:
        self.prompt_id = prompt_id
        super().__init__("Prompt not found")


class NodeNotFoundError(NotFoundError):
    def __init__(self, node_id: int) -> None:
        self.node_id = node_id
        super().__init__("Node not found")


class NoteNotFoundError(NotFoundError):
    def __init__(self, note_id: int) -> None:
        self.note_id = note_id
        super().__init__("Note not found")


class SavedTreeNotFoundError(NotFoundError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__("Saved tree not found")
