from fastapi import Form
from pydantic import BaseModel


class SetupForm(BaseModel):
    username: str = ""
    password: str = ""
    confirm_password: str = ""

    @classmethod
    def as_form(
            cls,
            username: str = Form(""),
            password: str = Form(""),
            confirm_password: str = Form(""),
    ) -> "SetupForm":
        return cls(username=username.strip(), password=password, confirm_password=confirm_password)
