"""Tag operations and types."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel

from iaas_client.models import OperationDef
from iaas_client.schema import INPUT_CONFIG, OUTPUT_CONFIG, element, param, wire
from iaas_client.service import Service


class ResourceTagPair(BaseModel):
    model_config = OUTPUT_CONFIG

    resource_id: Annotated[str | None, wire("resource_id")] = None
    resource_type: Annotated[str | None, wire("resource_type")] = None
    status: Annotated[str | None, wire("status")] = None
    status_time: Annotated[datetime | None, wire("status_time")] = None
    tag_id: Annotated[str | None, wire("tag_id")] = None


class ResourceTypeCount(BaseModel):
    model_config = OUTPUT_CONFIG

    count: Annotated[int | None, wire("count")] = None
    resource_type: Annotated[str | None, wire("resource_type")] = None


class Tag(BaseModel):
    model_config = OUTPUT_CONFIG

    color: Annotated[str | None, wire("color")] = None
    create_time: Annotated[datetime | None, wire("create_time")] = None
    description: Annotated[str | None, wire("description")] = None
    owner: Annotated[str | None, wire("owner")] = None
    resource_count: Annotated[int | None, wire("resource_count")] = None
    resource_tag_pairs: Annotated[list[ResourceTagPair] | None, wire("resource_tag_pairs")] = None
    resource_type_count: Annotated[
        list[ResourceTypeCount] | None, wire("resource_type_count")
    ] = None
    tag_id: Annotated[str | None, wire("tag_id")] = None
    tag_key: Annotated[str | None, wire("tag_key")] = None
    tag_name: Annotated[str | None, wire("tag_name")] = None


class AttachTagsInput(BaseModel):
    model_config = INPUT_CONFIG

    resource_tag_pairs: Annotated[
        list[ResourceTagPair] | None, param("resource_tag_pairs", required=True)
    ] = None


class AttachTagsOutput(BaseModel):
    model_config = OUTPUT_CONFIG

    message: Annotated[str | None, element("message")] = None
    action: Annotated[str | None, element("action")] = None
    ret_code: Annotated[int | None, element("ret_code")] = None


class CreateTagInput(BaseModel):
    model_config = INPUT_CONFIG

    color: Annotated[str | None, param("color")] = None
    tag_name: Annotated[str | None, param("tag_name")] = None


class CreateTagOutput(BaseModel):
    model_config = OUTPUT_CONFIG

    message: Annotated[str | None, element("message")] = None
    action: Annotated[str | None, element("action")] = None
    ret_code: Annotated[int | None, element("ret_code")] = None
    tag_id: Annotated[str | None, element("tag_id")] = None


class DescribeTagsInput(BaseModel):
    model_config = INPUT_CONFIG

    limit: Annotated[int | None, param("limit", default=20)] = None
    offset: Annotated[int | None, param("offset", default=0)] = None
    search_word: Annotated[str | None, param("search_word")] = None
    tags: Annotated[list[str] | None, param("tags")] = None
    verbose: Annotated[int | None, param("verbose", default=0, allowed=[0, 1])] = None


class DescribeTagsOutput(BaseModel):
    model_config = OUTPUT_CONFIG

    message: Annotated[str | None, element("message")] = None
    action: Annotated[str | None, element("action")] = None
    ret_code: Annotated[int | None, element("ret_code")] = None
    tag_set: Annotated[list[Tag] | None, element("tag_set")] = None
    total_count: Annotated[int | None, element("total_count")] = None


ATTACH_TAGS = OperationDef(action="AttachTags", input_type=AttachTagsInput, output_type=AttachTagsOutput)
CREATE_TAG = OperationDef(action="CreateTag", input_type=CreateTagInput, output_type=CreateTagOutput)
DESCRIBE_TAGS = OperationDef(
    action="DescribeTags", input_type=DescribeTagsInput, output_type=DescribeTagsOutput
)


class TagService(Service):
    name = "tag"
    operations = (ATTACH_TAGS, CREATE_TAG, DESCRIBE_TAGS)

    def attach_tags(self, input_value: AttachTagsInput | None = None) -> AttachTagsOutput:
        return self.invoke(ATTACH_TAGS, input_value)

    def create_tag(self, input_value: CreateTagInput | None = None) -> CreateTagOutput:
        return self.invoke(CREATE_TAG, input_value)

    def describe_tags(self, input_value: DescribeTagsInput | None = None) -> DescribeTagsOutput:
        return self.invoke(DESCRIBE_TAGS, input_value)
