"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

from dropcommon.constants import EXPIRATION_OPTIONS

COMMANDS = ["text", "send", "get", "edit", "remove", "history", "limits", "clear", "exit", "help"]

EXPIRATION_CHOICES = tuple(EXPIRATION_OPTIONS)

STYLE = Style.from_dict(
    {
        "prompt": "#2BB673 bold",
        "command": "#0088ff bold",
    }
)

GREEN = "\033[38;2;43;182;115m"
RESET = "\033[0m"

LOGO = f"""{GREEN}
  ___         _     ___
 / __|___  __| |___|   \\ _ _ ___ _ __
| (__/ _ \\/ _` / -_) |) | '_/ _ \\ '_ \\
 \\___\\___/\\__,_\\___|___/|_| \\___/ .__/
                                |_|
{RESET}"""

WELCOME_TITLE = "CodeDrop CLI - share text and files with a 4-digit code"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "codedrop> "

HISTORY_LIMIT = 50

HELP_TEXT = f"""Available commands:
  text <content> [--expire OPT] [--editable]   Share text and print its code
  send <file...> [--expire OPT]                Share one or more files
  get <code> [output_dir]                      Show text or save files (default: downloads/)
  edit <code> <content>                        Replace the text of an editable share
  remove <code>                                Delete a share
  history                                      List codes shared from this machine
  limits                                       Show server size limits
  clear                                        Clear screen and redisplay welcome message
  help                                         Show this help
  exit                                         Exit REPL

Expiration options: {', '.join(EXPIRATION_CHOICES)}
Examples:
  text "meeting notes at 3pm" --expire 1hour --editable
  send report.pdf
  send a.png b.png --expire 1day
  get 0421
  edit 0421 "meeting moved to 4pm\""""
