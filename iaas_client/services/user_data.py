"""User data operations."""

from typing import Annotated

from pydantic import BaseModel

from iaas_client.models import OperationDef
from iaas_client.schema import INPUT_CONFIG, OUTPUT_CONFIG, element, param
from iaas_client.service import Service


class UploadUserDataAttachmentInput(BaseModel):
    model_config = INPUT_CONFIG

    # Base64 encoded attachment body
    attachment_content: Annotated[str | None, param("attachment_content", required=True)] = None
    attachment_name: Annotated[str | None, param("attachment_name")] = None


class UploadUserDataAttachmentOutput(BaseModel):
    model_config = OUTPUT_CONFIG

    message: Annotated[str | None, element("message")] = None
    action: Annotated[str | None, element("action")] = None
    attachment_id: Annotated[str | None, element("attachment_id")] = None
    ret_code: Annotated[int | None, element("ret_code")] = None


UPLOAD_USER_DATA_ATTACHMENT = OperationDef(
    action="UploadUserDataAttachment",
    method="POST",
    input_type=UploadUserDataAttachmentInput,
    output_type=UploadUserDataAttachmentOutput,
)


class UserDataService(Service):
    name = "user_data"
    operations = (UPLOAD_USER_DATA_ATTACHMENT,)

    def upload_user_data_attachment(
        self, input_value: UploadUserDataAttachmentInput | None = None
    ) -> UploadUserDataAttachmentOutput:
        return self.invoke(UPLOAD_USER_DATA_ATTACHMENT, input_value)
