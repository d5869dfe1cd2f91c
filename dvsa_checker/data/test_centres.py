"""Driving test centres.

``name`` must match what is typed into the site's centre search; ``id`` is
the value of the centre's radio button on the results page. Abridged list;
any other centre can be given as ``{id, name}`` in settings.yaml.
"""

from typing import Dict, List, Optional

from ..core.config.config_models import Centre

TEST_CENTRES: List[Centre] = [
    Centre(id="532231", name="Birmingham (Garretts Green)"),
    Centre(id="533445", name="Birmingham (Kings Heath)"),
    Centre(id="518310", name="Birmingham (Sutton Coldfield)"),
    Centre(id="537448", name="Coventry"),
    Centre(id="516082", name="Leeds"),
    Centre(id="527014", name="Liverpool (Norris Green)"),
    Centre(id="527063", name="Liverpool (Speke)"),
    Centre(id="528522", name="London (Barking)"),
    Centre(id="524629", name="London (Hendon)"),
    Centre(id="523820", name="London (Morden)"),
    Centre(id="514521", name="Manchester (Chadderton)"),
    Centre(id="514619", name="Manchester (Sale)"),
    Centre(id="514691", name="Manchester (West Didsbury)"),
    Centre(id="542918", name="Sheffield (Middlewood)"),
]

_BY_ID: Dict[str, Centre] = {centre.id: centre for centre in TEST_CENTRES}


def find_centre(centre_id: str) -> Optional[Centre]:
    """Look up a bundled centre by its site id."""
    return _BY_ID.get(str(centre_id))
