from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass
class UploadedFile:
	"""One file part of the multipart body. Lives for a single request."""
	name: str
	content_type: str
	size: int
	data: bytes


@dataclass
class ExtractionResult:
	name: str
	text: str
	mime_type: str
	ok: bool
	skipped: bool = False

	def section(self) -> str:
		return f"=== {self.name} ===\n{self.text}"


@dataclass
class SynthesisResult:
	extracted_data: Dict[str, Any]
	generated_content: Dict[str, Any]


class JobAdData(BaseModel):
	model_config = ConfigDict(extra="ignore")

	title: str = ""
	company: str = ""
	location: str = ""
	description: str = ""


class FileInfo(BaseModel):
	name: str
	type: str
	size: int


class Referee(BaseModel):
	name: str = ""
	title: str = ""
	phone: str = ""


class ExtractedData(BaseModel):
	model_config = ConfigDict(extra="allow")

	name: str = ""
	province: str = ""
	phone: str = ""
	email: str = ""
	education: str = ""
	experience: str = ""
	skills: List[str] = Field(default_factory=list)
	summary: str = ""
	communityLeadership: str = ""
	referees: List[Referee] = Field(default_factory=list)


class GeneratedContent(BaseModel):
	model_config = ConfigDict(extra="allow")

	resume: str = ""
	coverLetter: str = ""
	atsScore: int = Field(default=0, ge=0, le=100)


class GenerateResponse(BaseModel):
	success: bool = True
	extractedData: ExtractedData
	generatedContent: GeneratedContent
	jobAdData: Optional[JobAdData] = None
	filesProcessed: List[FileInfo]
	aiPowered: bool = True


class ErrorResponse(BaseModel):
	success: bool = False
	error: str
	details: Optional[str] = None
