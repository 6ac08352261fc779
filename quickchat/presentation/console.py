"""Menu driven console front end"""

import logging
from typing import Callable, Optional

from quickchat.application.session import ChatSession
from quickchat.core.exceptions import (
    InvalidCredentialsError,
    QuickChatError,
    StoreWriteError,
)
from quickchat.domain import validators
from quickchat.domain.entities.dispatch_record import DispatchRecordEntity

logger = logging.getLogger(__name__)

MAIN_MENU = "Main Menu:\n1. Register\n2. Login\n3. Exit\nEnter your choice (1-3): "
USER_MENU = (
    "User Menu:\n1. Send Message(s)\n2. View Messages\n3. Logout\nEnter your choice (1-3): "
)
INVALID_CHOICE = "Invalid choice. Please enter 1, 2, or 3."
SEPARATOR = "-" * 50
SAVED_NOTICE = "Messages saved."


def format_record(record: DispatchRecordEntity, hash_label: str = "Message Hash") -> str:
    """Detail block for one record, with a configurable hash label"""
    return (
        f"Message ID: {record.message_id}\n"
        f"Recipient: {record.recipient}\n"
        f"Message: {record.body}\n"
        f"{hash_label}: {record.fingerprint}\n"
        f"Date: {record.date}\n"
        f"Time: {record.time}"
    )


class ConsoleApp:
    """Console loop over a chat session

    Input and output functions are injectable; end of input acts like
    cancelling the current prompt.
    """

    def __init__(
        self,
        session: ChatSession,
        input_func: Optional[Callable[[str], str]] = None,
        output_func: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.session = session
        self.input_func = input_func or input
        self.output_func = output_func or print

    def prompt(self, text: str) -> Optional[str]:
        try:
            return self.input_func(text)
        except EOFError:
            return None

    def say(self, text: str) -> None:
        self.output_func(text)

    def prompt_until_valid(
        self, text: str, check: Callable[[str], bool], success: str, failure: str
    ) -> Optional[str]:
        """Re-prompt until ``check`` accepts the answer; None on cancel"""
        while True:
            answer = self.prompt(text)
            if answer is None:
                return None
            if check(answer):
                self.say(success)
                return answer
            self.say(failure)

    def run(self) -> None:
        """Main menu loop"""
        while True:
            choice = self.prompt(MAIN_MENU)
            if choice is None:
                break
            choice = choice.strip()

            if choice == "1":
                self.register()
            elif choice == "2":
                if self.login():
                    self.user_menu()
            elif choice == "3":
                self.say("Goodbye!")
                break
            else:
                self.say(INVALID_CHOICE)

        self.shutdown()

    def shutdown(self) -> None:
        try:
            self.session.close()
        except StoreWriteError as e:
            logger.error(f"Exiting with {len(e.pending)} unsaved message(s): {e}")
            self.say(f"{e.message} ({len(e.pending)} message(s) were not saved)")

    def register(self) -> None:
        """Collect and register a new account"""
        username = self.prompt_until_valid(
            "Enter username: ",
            validators.is_valid_username,
            "Username successfully captured.",
            validators.USERNAME_ERROR,
        )
        if username is None:
            return

        password = self.prompt_until_valid(
            "Enter password: ",
            validators.is_valid_password,
            "Password successfully captured.",
            validators.PASSWORD_ERROR,
        )
        if password is None:
            return

        cell_number = self.prompt_until_valid(
            "Enter cell number (e.g. +27839868976): ",
            validators.is_valid_cell_number,
            "Cell phone number successfully captured.",
            validators.CELL_NUMBER_ERROR,
        )
        if cell_number is None:
            return

        try:
            self.session.register(username, password, cell_number)
        except QuickChatError as e:
            self.say(e.message)
            return

        self.say("Registration successful! You can now log in.")

    def login(self) -> bool:
        username = self.prompt("Login - Enter username: ")
        if username is None:
            return False
        password = self.prompt("Login - Enter password: ")
        if password is None:
            return False

        try:
            account = self.session.login(username, password)
        except InvalidCredentialsError as e:
            self.say(e.message)
            return False

        self.say(f"Welcome {account.username}, it is great to see you again.")
        return True

    def user_menu(self) -> None:
        while True:
            choice = self.prompt(USER_MENU)
            if choice is None:
                self.session.logout()
                return
            choice = choice.strip()

            if choice == "1":
                self.send_messages()
            elif choice == "2":
                self.show_all_messages()
            elif choice == "3":
                self.session.logout()
                self.say("Logged out.")
                return
            else:
                self.say(INVALID_CHOICE)

    def ask_message_count(self) -> Optional[int]:
        while True:
            answer = self.prompt("How many messages do you want to send? ")
            if answer is None:
                return None
            try:
                count = int(answer)
            except ValueError:
                continue
            if count > 0:
                return count

    def send_messages(self) -> None:
        """Send a batch of messages, one detail block per message"""
        count = self.ask_message_count()
        if count is None:
            return

        saved = 0
        for _ in range(count):
            recipient = self.prompt_until_valid(
                "Enter recipient cell number (e.g. +27839868976): ",
                validators.check_recipient_cell,
                "Cell phone number successfully captured.",
                validators.RECIPIENT_ERROR,
            )
            if recipient is None:
                break

            body = self.prompt_until_valid(
                "Enter message (max 250 chars): ",
                validators.is_valid_message_body,
                "Message ready to send.",
                validators.MESSAGE_ERROR,
            )
            if body is None:
                break

            try:
                record = self.session.send_message(recipient, body)
            except StoreWriteError as e:
                for pending in e.pending:
                    self.say(format_record(pending))
                self.say(f"{e.message}. The message will be saved on the next attempt.")
                continue
            except QuickChatError as e:
                self.say(e.message)
                continue

            saved += 1
            self.say(format_record(record))

        self.say(f"Total messages sent: {self.session.sent_count}")
        if saved:
            self.say(SAVED_NOTICE)

    def show_all_messages(self) -> None:
        records = self.session.list_messages()
        if not records:
            self.say("No messages found.")
            return

        self.say(
            "\n".join(
                f"{format_record(record, hash_label='Hash')}\n{SEPARATOR}" for record in records
            )
        )
