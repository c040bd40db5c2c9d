from typing import Any, Dict
import json
from pydantic import BaseModel, ConfigDict

class BaseSchema(BaseModel):
	"""
	Base schema class with JSON-safe serialization/deserialization.
	
	Backend payloads use camelCase keys; every schema accepts both the
	camelCase alias and the snake_case field name.
	"""
	
	model_config = ConfigDict(
		arbitrary_types_allowed=True,
		populate_by_name=True
	)
	
	def to_dict(self, by_alias: bool = False) -> Dict[str, Any]:
		"""Convert model to a JSON-compatible dictionary."""
		return json.loads(self.model_dump_json(by_alias=by_alias))
	
	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "BaseSchema":
		"""
		Create model instance from a dictionary.
		
		Datetime strings (including a trailing 'Z') are handled by pydantic.
		"""
		return cls.model_validate(data)
	
	def to_json(self) -> str:
		"""Serialize to the backend's camelCase JSON representation."""
		return self.model_dump_json(by_alias=True)
	
	@classmethod
	def from_json(cls, json_str: str) -> "BaseSchema":
		"""Deserialize a JSON string back into a schema object."""
		return cls.from_dict(json.loads(json_str))
