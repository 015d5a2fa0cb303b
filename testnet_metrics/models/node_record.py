from sqlmodel import SQLModel, Field
from datetime import datetime


class NodeRecord(SQLModel):
    """
    A single observation of a testnet node from the `node_records` collection.
    The same peer_id shows up once per snapshot, so these are not unique per node.
    """
    peer_id: str = Field(description="Identifier of the observed peer.")
    version: str = Field(description="Node software version reported in the snapshot.")
    peer_count: int = Field(ge=0, description="Number of peers the node was connected to.")
    timestamp: datetime = Field(description="When the snapshot was taken.")

    class Config:
        extra = "ignore"
