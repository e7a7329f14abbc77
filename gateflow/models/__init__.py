from gateflow.models.principal import Principal
from gateflow.models.visitor_pass import VisitorPass
from gateflow.models.entry_record import EntryRecord
from gateflow.models.sos_broadcast import SOSBroadcast
from gateflow.models.incident import Incident
from gateflow.models.system_logs import SystemLog
