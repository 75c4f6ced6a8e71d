"""Command pattern implementation for editor actions."""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple, TYPE_CHECKING

from .cursor import Action
from .keyboard import KeyType

if TYPE_CHECKING:
    from .editor import Editor
    from .keyboard import KeyEvent


class EditorCommand(ABC):
    """Base class for editor commands."""

    @abstractmethod
    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """Execute the command.

        Args:
            editor: Editor instance
            key_event: The key event that triggered this command

        Returns:
            True if the command modified the document
        """
        pass


class MovementCommand(EditorCommand):
    """Moves the cursor; never modifies the document."""

    def __init__(self, action: Action):
        self.action = action

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        editor.model.move(self.action)
        return False


class EditCommand(EditorCommand):
    """Base class for editing commands.

    ``execute`` returns False when the edit was a no-op at a buffer boundary.
    """


class BackspaceCommand(EditCommand):
    def execute(self, editor, key_event):
        return editor.model.backspace()


class DeleteCharCommand(EditCommand):
    def execute(self, editor, key_event):
        return editor.model.delete_char()


class InsertNewlineCommand(EditCommand):
    def execute(self, editor, key_event):
        return editor.model.split_line()


class InsertTextCommand(EditCommand):
    def execute(self, editor, key_event):
        return editor.model.insert_text(key_event.value)


class SystemCommand(EditorCommand):
    """Base class for system commands like save, quit, find."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """System commands don't modify document content directly."""
        self._execute_system(editor, key_event)
        return False

    @abstractmethod
    def _execute_system(self, editor: 'Editor', key_event: 'KeyEvent'):
        """Perform the system action."""
        pass


class QuitCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor.request_quit()


class SaveCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor.save_file()


class FindCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor.start_search()


class CommandRegistry:
    """Registry for mapping key combinations to commands."""

    def __init__(self):
        self._commands: Dict[Tuple[KeyType, str], EditorCommand] = {}
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default command mappings."""
        # Movement commands
        self.register((KeyType.SPECIAL, 'up'), MovementCommand(Action.UP))
        self.register((KeyType.SPECIAL, 'down'), MovementCommand(Action.DOWN))
        self.register((KeyType.SPECIAL, 'left'), MovementCommand(Action.LEFT))
        self.register((KeyType.SPECIAL, 'right'), MovementCommand(Action.RIGHT))
        self.register((KeyType.SPECIAL, 'home'), MovementCommand(Action.HOME))
        self.register((KeyType.SPECIAL, 'end'), MovementCommand(Action.END))
        self.register((KeyType.SPECIAL, 'page_up'), MovementCommand(Action.PAGE_UP))
        self.register((KeyType.SPECIAL, 'page_down'), MovementCommand(Action.PAGE_DOWN))

        # Editing commands
        self.register((KeyType.SPECIAL, 'backspace'), BackspaceCommand())
        self.register((KeyType.SPECIAL, 'delete'), DeleteCharCommand())
        self.register((KeyType.SPECIAL, 'enter'), InsertNewlineCommand())

        # System commands
        self.register((KeyType.CTRL, 'q'), QuitCommand())
        self.register((KeyType.CTRL, 's'), SaveCommand())
        self.register((KeyType.CTRL, 'f'), FindCommand())

    def register(self, key: Tuple[KeyType, str], command: EditorCommand):
        """Register a command for a key combination."""
        self._commands[key] = command

    def get_command(self, key_type: KeyType, value: str) -> Optional[EditorCommand]:
        """Get the command for a key combination."""
        return self._commands.get((key_type, value))

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """Execute the command for the given key event.

        Returns:
            True if the document was modified
        """
        command = self.get_command(key_event.key_type, key_event.value)
        if command:
            return command.execute(editor, key_event)

        # Handle regular text input
        if key_event.key_type == KeyType.REGULAR:
            return InsertTextCommand().execute(editor, key_event)

        return False
