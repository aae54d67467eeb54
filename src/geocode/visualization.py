#!/usr/bin/env python3
"""
Cluster visualization using folium maps.
"""

from typing import List, Sequence
import logging
import folium
from folium.template import Template

from .kmeans import Cluster

logger = logging.getLogger(__name__)

CLUSTER_COLORS = [
    "#D23C4C",
    "#2E86AB",
    "#69498F",
    "#3C9D5D",
    "#E08E0B",
    "#8C564B",
    "#E377C2",
    "#7F7F7F",
]


def cluster_color(index: int) -> str:
    """Colour for the cluster at the given position, cycling through the palette."""
    return CLUSTER_COLORS[index % len(CLUSTER_COLORS)]


class ClusterLegend(folium.MacroElement):
    """Legend listing each cluster's colour and member count."""

    def __init__(self, clusters: Sequence[Cluster]):
        super().__init__()
        self.entries = [
            {"color": cluster_color(i), "count": len(c)} for i, c in enumerate(clusters)
        ]

        self._template = Template(
            """
        {% macro html(this, kwargs) %}
        <div id="cluster-legend" style="
            position: fixed;
            bottom: 50px;
            left: 50px;
            width: 180px;
            background-color: white;
            border: 2px solid grey;
            z-index: 9999;
            font-size: 13px;
            padding: 12px;
            font-family: Arial, sans-serif;
            border-radius: 5px;
            box-shadow: 0 2px 5px rgba(0,0,0,0.2);
        ">
            <b>Clusters</b><br>
            {% for entry in this.entries %}
            <div style="margin: 4px 0; line-height: 1.3;">
                <span style="color: {{ entry.color }}; font-size: 18px;">&#9679;</span>
                {{ loop.index }}: {{ entry.count }} points
            </div>
            {% endfor %}
        </div>
        {% endmacro %}
        """
        )


def create_cluster_map(clusters: List[Cluster], output_filename: str) -> None:
    """
    Create an interactive map of the clusters and save it as HTML.

    Every member is drawn as a small circle in its cluster's colour and every
    centroid as a marker whose popup gives the member count.

    Args:
        clusters: Clusters as returned by cluster()
        output_filename: Path where HTML map file should be saved

    Raises:
        ValueError: If there are no clusters
    """
    if not clusters:
        raise ValueError("Cannot create map for empty cluster list")

    positions = [c.centroid for c in clusters] + [p for c in clusters for p in c.points]
    latitudes = [p.latitude for p in positions]
    longitudes = [p.longitude for p in positions]
    south, north = min(latitudes), max(latitudes)
    west, east = min(longitudes), max(longitudes)

    center_lat = (south + north) / 2
    center_lon = (west + east) / 2
    logger.debug(f"Creating map centered at ({center_lat:.4f}, {center_lon:.4f})")

    cluster_map = folium.Map(location=[center_lat, center_lon], tiles=None)

    folium.TileLayer(
        tiles="CartoDB positron",
        attr=(
            "&copy; <a href='https://www.openstreetmap.org/copyright'>OpenStreetMap</a> "
            "contributors &copy; <a href='https://carto.com/attributions'>CARTO</a>"
        ),
        name="Standard",
        control=True,
        show=True,
    ).add_to(cluster_map)

    for index, c in enumerate(clusters):
        color = cluster_color(index)
        for p in c.points:
            folium.CircleMarker(
                [p.latitude, p.longitude],
                radius=4,
                color=color,
                fill=True,
                fill_opacity=0.7,
                popup=f"{p.latitude:.6f}, {p.longitude:.6f}",
            ).add_to(cluster_map)

        folium.Marker(
            [c.centroid.latitude, c.centroid.longitude],
            popup=f"<b>Cluster {index + 1}</b><br>{len(c)} points",
            icon=folium.Icon(color="black", icon="screenshot"),
        ).add_to(cluster_map)

    cluster_map.add_child(ClusterLegend(clusters))
    cluster_map.fit_bounds([[south, west], [north, east]])
    cluster_map.save(output_filename)

    logger.debug(f"Map saved to {output_filename} with {len(clusters)} clusters")
