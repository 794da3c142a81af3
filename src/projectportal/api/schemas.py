"""Request bodies for the JSON endpoints.

Every field is optional at the schema level; handlers check required fields
themselves so missing values produce the portal's 400 envelope.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..models.project import TeamMember
from ..services.completion import CompletionRequest, UploadedFile


class _Body(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class LocationPreferenceBody(_Body):
    use_default: bool = False


class CreateProjectBody(_Body):
    project_name: str | None = None
    save_path: str | None = None
    team_members: list[TeamMember] | None = None


class UploadedFileBody(_Body):
    name: str | None = None
    size: int = 0

    def to_uploaded_file(self) -> UploadedFile:
        return UploadedFile(name=self.name, size=self.size)


class CompleteProjectBody(_Body):
    project_name: str | None = None
    team_members: list[TeamMember] | None = None
    project_path: str | None = None
    folder_name: str | None = None
    readme_file: UploadedFileBody | None = None
    installation_file: UploadedFileBody | None = None
    source_file: UploadedFileBody | None = None

    def to_request(self) -> CompletionRequest:
        empty = UploadedFileBody()
        return CompletionRequest(
            project_name=self.project_name,
            team_members=self.team_members,
            project_path=self.project_path,
            folder_name=self.folder_name,
            readme_file=(self.readme_file or empty).to_uploaded_file(),
            installation_file=(self.installation_file or empty).to_uploaded_file(),
            source_file=(self.source_file or empty).to_uploaded_file(),
        )
