"""CRD-level, topology and validation markers applied to CRDs and schemata."""