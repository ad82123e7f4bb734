from crdgen.ident import GroupKind, GroupVersion, Package, TypeIdent, TypeInfo


def test_add_error_records_errors_in_order():
    pkg = Package(pkg_path="root")
    first = ValueError("first")
    second = KeyError("second")
    pkg.add_error(first)
    pkg.add_error(second)
    assert pkg.errors == [first, second]


def test_package_id_defaults_to_path():
    assert Package(pkg_path="root").id == "root"
    assert Package(pkg_path="root", id="other").id == "other"


def test_type_ident_str_quotes_package_id():
    ident = TypeIdent(Package(pkg_path="root"), "RootType")
    assert str(ident) == '"root".RootType'


def test_type_ident_hashes_by_package_identity():
    pkg_a = Package(pkg_path="same")
    pkg_b = Package(pkg_path="same")
    table = {TypeIdent(pkg_a, "Foo"): 1}
    assert table[TypeIdent(pkg_a, "Foo")] == 1
    assert TypeIdent(pkg_b, "Foo") not in table


def test_group_kind_str():
    gk = GroupKind(group="testdata.kubebuilder.io", kind="CronJob")
    assert str(gk) == "CronJob.testdata.kubebuilder.io"
    assert str(GroupKind(kind="CronJob")) == "CronJob"


def test_group_version_str():
    assert str(GroupVersion(group="testdata.kubebuilder.io", version="v1")) == "testdata.kubebuilder.io/v1"
    assert str(GroupVersion(version="v1")) == "v1"


def test_type_info_fields_hold_field_infos():
    field_info = TypeInfo(name="Spec", json_tag="spec,omitempty")
    info = TypeInfo(name="CronJob", fields=[field_info])
    assert info.fields[0].json_tag == "spec,omitempty"
    assert TypeInfo().json_tag is None