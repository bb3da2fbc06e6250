from textual.message import Message

class StatusUpdate(Message):
    """A sync status line, posted from the sync worker thread."""
    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__()
