"""vCloud Express content types.

Links in a vApp document carry one of these as their ``type`` attribute, which
is how a decoder tells a VDC link apart from generic extended-info links.
"""

VCLOUD_PREFIX = "application/vnd.vmware.vcloud."

ORG_XML = VCLOUD_PREFIX + "org+xml"
VDC_XML = VCLOUD_PREFIX + "vdc+xml"
VAPP_XML = VCLOUD_PREFIX + "vApp+xml"
VAPPTEMPLATE_XML = VCLOUD_PREFIX + "vAppTemplate+xml"
CATALOG_XML = VCLOUD_PREFIX + "catalog+xml"
CATALOGITEM_XML = VCLOUD_PREFIX + "catalogItem+xml"
NETWORK_XML = VCLOUD_PREFIX + "network+xml"
TASK_XML = VCLOUD_PREFIX + "task+xml"
TASKSLIST_XML = VCLOUD_PREFIX + "tasksList+xml"
ERROR_XML = VCLOUD_PREFIX + "error+xml"
