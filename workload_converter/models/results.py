from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from workload_converter.models.descriptor import WorkloadDescriptor


class ManifestResult(BaseModel):
    source: str
    kind: str
    name: str
    namespace: str
    containers: int
    replicas: Optional[int] = None
    manifest: str
    issues: List[str] = Field(default_factory=list)


class FormResult(BaseModel):
    source: str
    kind: Optional[str] = None
    descriptor: Optional[WorkloadDescriptor] = None
    error: Optional[str] = None


class ConversionReport(BaseModel):
    manifests: List[ManifestResult] = Field(default_factory=list)
    forms: List[FormResult] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    @property
    def failed(self) -> bool:
        return any(f.error for f in self.forms)
