from firemap.schemas.viewport import BoundingBox, ViewportState, MapPosition
from firemap.schemas.wildfire import FireRecord, SeverityTier
from firemap.schemas.alert import Alert, AlertSeverity, FireUpdate, WildfireStats
from firemap.schemas.cluster import ClusterPoint, ClusterLeaf, ClusterAggregate, ClusterNode
from firemap.schemas.marker import MarkerKind, MarkerOpType, MarkerSpec, MarkerOp

__all__ = [
	"BoundingBox",
	"ViewportState",
	"MapPosition",
	"FireRecord",
	"SeverityTier",
	"Alert",
	"AlertSeverity",
	"FireUpdate",
	"WildfireStats",
	"ClusterPoint",
	"ClusterLeaf",
	"ClusterAggregate",
	"ClusterNode",
	"MarkerKind",
	"MarkerOpType",
	"MarkerSpec",
	"MarkerOp"
]
